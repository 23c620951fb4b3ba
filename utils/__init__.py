"""
Board math, free-cell lookup and timer bookkeeping.
"""
