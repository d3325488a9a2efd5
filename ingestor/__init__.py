"""
Ingestor: stores posted JSON payloads as files on disk.
"""
