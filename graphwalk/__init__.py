"""
GraphWalk - interactive graph editor and BFS/DFS traversal visualizer.
"""

__version__ = "0.1.0"
