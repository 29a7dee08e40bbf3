"""Command-line interface for nebula"""
