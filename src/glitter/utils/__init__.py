"""Glitter utilities: logging policy, configuration, undo history"""
