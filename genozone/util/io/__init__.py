#!/usr/bin/env python
"""Wrappers for file I/O: stream filters, colored writers, and file openers"""
