"""Cross-reference validation over a loaded campaign.

Every by-identifier reference in the content is checked against its
target registry, and one diagnostic is produced per dangling reference.
The pass reads the campaign and nothing else, so it can be re-run at any
time and always gives the same answer for the same content.
"""

from __future__ import annotations

from questkeeper.models.campaign import Campaign, Diagnostic, Severity


def _dangling(message: str, entity_id: str) -> Diagnostic:
    return Diagnostic(Severity.WARNING, message, entity_id=entity_id)


def validate_cross_references(campaign: Campaign) -> list[Diagnostic]:
    """Check every cross-reference in a campaign.

    Checked relationships:
        * campaign starting location -> locations
        * location exits -> locations
        * location NPCs -> NPCs
        * location ground items -> items of any kind
        * NPC home location -> locations
        * mini-game reward item -> items of any kind
        * trial location -> locations
        * trial member mini-games -> mini-games
        * trial prerequisite flags -> flags some content can set

    Args:
        campaign: A fully populated campaign.

    Returns:
        One diagnostic per dangling reference, in registry order.
    """
    findings: list[Diagnostic] = []
    locations = campaign.locations
    items = campaign.items

    start = campaign.starting_location_id
    if start is not None and start not in locations:
        findings.append(
            _dangling(f"Campaign '{campaign.id}' starting location '{start}' not found", campaign.id)
        )

    for location in locations.values():
        for direction, target in location.exits.items():
            if target not in locations:
                findings.append(
                    _dangling(
                        f"Location '{location.id}' exit '{direction}' references unknown location '{target}'",
                        location.id,
                    )
                )
        for npc_id in location.npc_ids:
            if npc_id not in campaign.npcs:
                findings.append(
                    _dangling(f"Location '{location.id}' references unknown NPC '{npc_id}'", location.id)
                )
        for item_id in location.item_ids:
            if item_id not in items:
                findings.append(
                    _dangling(f"Location '{location.id}' references unknown item '{item_id}'", location.id)
                )

    for npc in campaign.npcs.values():
        if npc.location_id is not None and npc.location_id not in locations:
            findings.append(
                _dangling(f"NPC '{npc.id}' references unknown location '{npc.location_id}'", npc.id)
            )

    for mini_game in campaign.mini_games.values():
        reward = mini_game.reward_item_id
        if reward is not None and reward not in items:
            findings.append(
                _dangling(
                    f"Mini-game '{mini_game.id}' reward references unknown item '{reward}'",
                    mini_game.id,
                )
            )

    known_flags = campaign.known_flags()
    for trial in campaign.trials.values():
        if trial.location_id is not None and trial.location_id not in locations:
            findings.append(
                _dangling(
                    f"Trial '{trial.id}' references unknown location '{trial.location_id}'",
                    trial.id,
                )
            )
        for mini_game_id in trial.mini_game_ids:
            if mini_game_id not in campaign.mini_games:
                findings.append(
                    _dangling(
                        f"Trial '{trial.id}' references unknown mini-game '{mini_game_id}'",
                        trial.id,
                    )
                )
        for flag in sorted(trial.prerequisites):
            if flag not in known_flags:
                findings.append(
                    _dangling(
                        f"Trial '{trial.id}' prerequisite flag '{flag}' is never set",
                        trial.id,
                    )
                )

    return findings


__all__ = [
    "validate_cross_references",
]
