"""In-memory commerce backend for development and tests"""
