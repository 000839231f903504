"""Upload JSON payloads to Google Drive and hand back a public download link."""
