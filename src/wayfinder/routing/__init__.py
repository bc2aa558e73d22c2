"""Routing — route tree compilation, location normalization and matching.

Route trees are compiled once into append-only indices; every
navigation target is normalized and matched against them.
"""
