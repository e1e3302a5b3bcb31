"""Routing — ordered route table, first registered wins.

Routes are registered during setup and frozen when the app starts
serving.
"""
