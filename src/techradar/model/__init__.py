"""
The MODEL layer contains pure data structures and business logic.
It has NO knowledge of the GUI (Qt) or of the layout.
It deals with the radar dataset, its validation and its JSON exchange format.
"""
