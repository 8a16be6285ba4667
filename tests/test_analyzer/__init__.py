"""Analyzer Tests"""
