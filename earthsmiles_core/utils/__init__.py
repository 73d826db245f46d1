"""Geometry, validation and export utilities"""
