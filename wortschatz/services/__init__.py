"""Services for entry review, completion and situational alternatives."""

from wortschatz.services.alternatives import AlternativesEngine
from wortschatz.services.completion import EntryFields, FieldCompleter
from wortschatz.services.reviewer import Reviewer

__all__ = ["AlternativesEngine", "EntryFields", "FieldCompleter", "Reviewer"]
