"""
Charts of an image classifier's performance on benthic attributes.
"""
__version__ = "0.1.0"
