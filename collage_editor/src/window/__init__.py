"""Main window mixins for CollageEditor"""
