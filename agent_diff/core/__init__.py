"""
Core utilities: exceptions shared by the chain provider, analysis
pipeline, baseline store and CLI.
"""
