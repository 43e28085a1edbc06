from __future__ import annotations

from typing import Final

"""Catalogue of field keys the game's battle report is known to export.

A header whose key is listed here counts as recognized (`exact-match`) even
when it has never been imported before.
"""

__all__ = [
    "SUPPORTED_FIELDS",
    "is_supported_field",
]

SUPPORTED_FIELDS: Final[frozenset[str]] = frozenset({
    # internal
    "_date", "_time", "_notes", "_runType", "_rank",
    # battle report header
    "battleDate", "gameTime", "realTime", "tier", "wave", "killedBy",
    "coinsEarned", "coinsPerHour", "cashEarned", "interestEarned",
    "gemBlocksTapped", "cellsEarned", "rerollShardsEarned",
    # combat
    "damageTaken", "damageTakenWall", "damageTakenWhileBerserked",
    "damageGainFromBerserk", "deathDefy", "lifesteal", "damageDealt",
    "projectilesDamage", "rendArmorDamage", "projectilesCount",
    "thornDamage", "orbDamage", "enemiesHitByOrbs", "landMineDamage",
    "landMinesSpawned", "deathRayDamage", "smartMissileDamage",
    "innerLandMineDamage", "chainLightningDamage", "deathWaveDamage",
    "taggedByDeathwave", "swampDamage", "blackHoleDamage",
    "electronsDamage",
    # utility
    "wavesSkipped", "recoveryPackages", "freeAttackUpgrade",
    "freeDefenseUpgrade", "freeUtilityUpgrade", "hpFromDeathWave",
    "coinsFromDeathWave", "cashFromGoldenTower", "coinsFromGoldenTower",
    "coinsFromBlackHole", "coinsFromSpotlight", "coinsFromOrb",
    "coinsFromCoinUpgrade", "coinsFromCoinBonuses",
    # enemies destroyed
    "totalEnemies", "basic", "fast", "tank", "ranged", "boss", "protector",
    "totalElites", "vampires", "rays", "scatters", "saboteur", "commander",
    "overcharge", "destroyedByOrbs", "destroyedByThorns",
    "destroyedByDeathRay", "destroyedByLandMine", "destroyedInSpotlight",
    # bots
    "flameBotDamage", "thunderBotStuns", "goldenBotCoinsEarned",
    "destroyedInGoldenBot",
    # guardian
    "guardianDamage", "summonedEnemies", "guardianCoinsStolen",
    "coinsFetched", "gems", "medals", "rerollShards", "cannonShards",
    "armorShards", "generatorShards", "coreShards", "commonModules",
    "rareModules",
})


def is_supported_field(field_key: str) -> bool:
    return field_key in SUPPORTED_FIELDS
