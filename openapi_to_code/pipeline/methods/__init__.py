"""
Client method synthesis: media types, servers and function declarations.
"""
