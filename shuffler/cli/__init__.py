"""
Command-line interface: argument parsing, prompts and progress display.
"""
