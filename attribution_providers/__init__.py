"""
External collaborators for the attribution kernel.

Nothing here is imported by attribution_engine itself; callers inject these
into sessions or presentation adapters.
"""
