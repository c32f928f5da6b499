"""Google Drive storage adapter for CMS image uploads."""
