"""Render query service Tests"""
