"""
Command-line application for the HSE inspection client.
"""
