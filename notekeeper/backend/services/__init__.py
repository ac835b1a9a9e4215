"""
Services.

- projection: pure search/sort of the note collection
- presentation: display formatting and tag editing helpers
- note: business rules shared by the HTTP API and the notes store
- store: in-memory note collection for one user session
- notifications: user-facing success and error messages
"""
