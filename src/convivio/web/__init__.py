"""
Convivio Web - HTTP surface for the backend-mediated proposal.
"""
