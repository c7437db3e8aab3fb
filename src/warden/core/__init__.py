"""Errors, configuration, identity helpers and the Policy Gate."""
