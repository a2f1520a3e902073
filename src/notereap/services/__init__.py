"""Service layer — traversal, filtering, deletion, and backlink rewriting.

Services talk to the corpus only through the :class:`~notereap.services.protocols.Corpus`
collaborator interface and report through :class:`~notereap.services.result.ServiceResult`.
"""
