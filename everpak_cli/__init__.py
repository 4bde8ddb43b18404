"""
Everpak CLI
Command line entry points for packing, unpacking and inspecting archives.
"""
