"""Tool framework for the Prismatic CLI.

Provides argument models, a registry/dispatcher, flag encoding, output
formatting, and the concrete ``prism_*`` tools.
"""
