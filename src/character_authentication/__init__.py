"""Character Authentication

Pluggable authenticator modules for the character host application.
Each authenticator exposes its own routes, validates credentials and maps
an external account to a core identity before establishing a session.
"""

__version__ = "1.0.0"
