"""Cart Engine - shopping cart pricing and state consistency"""

__version__ = "1.0.0"
