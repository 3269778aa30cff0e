"""
Response wrapper for the Amazon SimpleDB API.
The body of an already downloaded response is parsed lazily into lxml objects.
"""
__version__ = '0.1.0'


from .response import SimpleDbResponse, XML_NAMESPACE
