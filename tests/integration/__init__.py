"""
Integration tests for the slot pool

Integration tests focus on:
1. The full entry -> pay -> exit workflow through the application service
2. Concurrent callers sharing one pool
3. The command-line entry point
"""
