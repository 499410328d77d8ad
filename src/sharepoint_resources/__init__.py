"""Typed models for Microsoft Graph SharePoint sites, drives and drive items."""

__version__ = "0.1.0"
