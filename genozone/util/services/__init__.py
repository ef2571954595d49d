#!/usr/bin/env python
"""Exceptions, warning categories, and warning filters used throughout :data:`genozone`"""
