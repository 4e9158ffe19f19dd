"""
The MODEL layer contains pure data structures and geometry logic.
It has NO knowledge of physics engines, rendering or markup traversal.
It deals with Points, Curves, Shapes, Styles and Polygons.
"""
