"""
Relationship workflow for player social groups.

This module provides the request/accept/reject/ignore/remove state machine
shared by every group kind, and the background sweep of expired requests.
"""

from .engine import RelationshipWorkflow
from .expiry import RequestExpirySweeper, SweepMetrics

__all__ = ['RelationshipWorkflow', 'RequestExpirySweeper', 'SweepMetrics']
