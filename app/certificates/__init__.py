"""
Certificate rendering.

layout.py holds the wording rules and the justified-paragraph line breaker
(pure functions); generator.py draws the A4 landscape PDF with reportlab.
"""
