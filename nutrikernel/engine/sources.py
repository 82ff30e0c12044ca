"""Citation and protein-rationale tables used by the calculation explanation."""

from __future__ import annotations

from nutrikernel.engine.models import Sources, TrainingGoal

MIFFLIN_ST_JEOR_1990 = "https://doi.org/10.1093/ajcn/51.2.241"
ENERGY_BALANCE_REVIEW = "https://doi.org/10.1111/sms.14075"
ACSM_GUIDELINES = "https://doi.org/10.1249/MSS.0000000000000852"
PROTEIN_IN_DEFICIT = "https://doi.org/10.1097/MCO.0000000000000980"
ISSN_PROTEIN_POSITION_STAND = "https://doi.org/10.1186/s12970-017-0177-8"

GOAL_SOURCES: dict[TrainingGoal, str] = {
    TrainingGoal.weight_loss: ENERGY_BALANCE_REVIEW,
    TrainingGoal.muscle_gain: ENERGY_BALANCE_REVIEW,
}

PROTEIN_SOURCES: dict[TrainingGoal, str] = {
    TrainingGoal.weight_loss: PROTEIN_IN_DEFICIT,
}

PROTEIN_RATIONALES: dict[TrainingGoal, str] = {
    TrainingGoal.strength: "optimal for muscle protein synthesis and recovery in strength training",
    TrainingGoal.muscle_gain: "maximal protein synthesis for hypertrophy (ISSN recommendation)",
    TrainingGoal.weight_loss: "raised to preserve muscle during a deficit (clinically validated)",
    TrainingGoal.endurance: "moderate - endurance athletes need less than strength athletes",
    TrainingGoal.general_fitness: "balanced base for general fitness and health",
}

DEFAULT_PROTEIN_RATIONALE = "baseline intake for maintaining lean mass"


def sources_for_goal(goal: TrainingGoal | str) -> Sources:
    return Sources(
        formula=MIFFLIN_ST_JEOR_1990,
        goal_recommendation=GOAL_SOURCES.get(goal, ACSM_GUIDELINES),
        protein_recommendation=PROTEIN_SOURCES.get(goal, ISSN_PROTEIN_POSITION_STAND),
    )


def protein_rationale_for_goal(goal: TrainingGoal | str) -> str:
    return PROTEIN_RATIONALES.get(goal, DEFAULT_PROTEIN_RATIONALE)
