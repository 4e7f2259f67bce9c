"""
Attribution kernel: licence registry, step tables and the dialogue engine that
walks them to decide how a reused media asset must be attributed.
"""
