"""Suggestion engine for CartRec.

This module contains the product vector space, vector builders, similarity
scoring, purchase-history aggregation and neighbor ranking used to turn a
cart and a snapshot of past orders into ranked product suggestions.
"""
