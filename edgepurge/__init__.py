"""edgepurge: cache tag derivation and Fast Purge coordination for a CMS."""
