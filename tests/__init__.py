"""Test suite for the slot pool parking simulator"""
