"""src/urlcraft/utils/__init__.py"""
