"""Unified command-line interface for tallybook.

Usage:
    tb import [file] [--apply]
    tb add <item> --date <date> --unit-price <price> [--qty N]
    tb list [--query text]
    tb delete <index> [...]
    tb summary
    tb export [--output file]
    tb categories
    tb serve [--port]
"""
