"""
Pollinations Relay - relais streaming vers l'API texte Pollinations.
"""

__version__ = "1.0.0"
