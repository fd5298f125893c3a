"""linkbio — link-in-bio backend.

Users register, log in with a bearer token, and manage an ordered list
of links that is published on a public profile page. Every outbound
click goes through a counting redirect.
"""

__version__ = "0.1.0"
