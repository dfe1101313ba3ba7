"""dwzplan: Die-With-Zero retirement feasibility engine."""

__version__ = "0.1.0"

from dwzplan.analytics.age_search import SolverResult as SolverResult
from dwzplan.analytics.age_search import evaluate_retirement_age as evaluate_retirement_age
from dwzplan.analytics.age_search import find_earliest_viable_age as find_earliest_viable_age
from dwzplan.analytics.bridge import BridgeAssessment as BridgeAssessment
from dwzplan.analytics.bridge import assess_bridge as assess_bridge
from dwzplan.analytics.constraints import explain_binding_constraint as explain_binding_constraint
from dwzplan.analytics.spend_solver import SolveOutcome as SolveOutcome
from dwzplan.analytics.spend_solver import SpendSolution as SpendSolution
from dwzplan.analytics.spend_solver import solve_sustainable_spend as solve_sustainable_spend
from dwzplan.analytics.split_optimizer import SplitOptimization as SplitOptimization
from dwzplan.analytics.split_optimizer import optimize_split as optimize_split
from dwzplan.config.defaults import default_assumptions as default_assumptions
from dwzplan.config.defaults import default_couple as default_couple
from dwzplan.config.defaults import default_household as default_household
from dwzplan.config.defaults import default_solver_settings as default_solver_settings
from dwzplan.config.defaults import go_go_schedule as go_go_schedule
from dwzplan.config.schema import AgeBand as AgeBand
from dwzplan.config.schema import AgeBounds as AgeBounds
from dwzplan.config.schema import Assumptions as Assumptions
from dwzplan.config.schema import FutureInflow as FutureInflow
from dwzplan.config.schema import HouseholdConfig as HouseholdConfig
from dwzplan.config.schema import OptimizerOptions as OptimizerOptions
from dwzplan.config.schema import PersonConfig as PersonConfig
from dwzplan.config.schema import SavingsSplitPolicy as SavingsSplitPolicy
from dwzplan.config.schema import SolverSettings as SolverSettings
from dwzplan.config.schema import SpendScheduleConfig as SpendScheduleConfig
from dwzplan.core.drawdown import DrawdownResult as DrawdownResult
from dwzplan.core.drawdown import simulate_drawdown as simulate_drawdown
from dwzplan.core.projector import Projection as Projection
from dwzplan.core.projector import project as project
from dwzplan.core.state import Balances as Balances
from dwzplan.core.state import PathPoint as PathPoint
