"""
ActivityPub Integration

This package provides the building blocks used to read remote ActivityPub data.

Key Components:
- docloader.py: Fetching remote JSON-LD documents
- webfinger.py: WebFinger discovery of account resources
- vocab.py: ActivityStreams models and document materialization

Remote failures are reported by the document loader as exceptions, while WebFinger
lookups return None on failure. Malformed documents raise MalformedDocumentError.
"""
