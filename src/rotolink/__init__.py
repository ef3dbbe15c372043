"""
rotolink - RotoWire predicted lineups matched to FPL players

Cross-references the RotoWire soccer lineups page with the Fantasy Premier
League roster and produces a per-fixture lineup map with a playing status
for every player.

Main components:
- scrape: Upstream HTTP client and the lineups page parser
- players: Name normalization, position classification, identity matching
- teams: RotoWire team abbreviation mapping
- lineup_statuses: Lineup status table and availability lookup
- services: The lineup pipeline
- web: FastAPI endpoint serving the lineup map
"""

__version__ = "1.0.0"
