"""Unit tests for the domain and infrastructure layers"""
