"""
Preference-weighted faceted filtering and ranking for product catalogs.

The package collates catalog items into facet histograms, ranks facet values
for the filter bar from the user's bought and liked history, and ranks items
by that history while penalising items that miss explicitly selected filters.
Everything here is a pure function of its inputs: there are no side effects
on import and no state is kept between calls.
"""
