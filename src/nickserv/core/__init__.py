"""Core types shared across the plugin: errors and protocol constants."""
