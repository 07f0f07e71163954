"""
Ready-made generator graphs.
"""
