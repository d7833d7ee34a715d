"""
floorgrid: occupancy grids in, wall contours and distance-to-wall fields out.
"""
