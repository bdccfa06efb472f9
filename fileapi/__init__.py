"""FileAPI: text files in Google Drive, addressed by path under FileApi/<projectName>."""
