#Marks datastore as a package.
#Re-exports the read contract the estimator consumes and its implementations
#(REST client + repositories, in-memory fixtures) so other modules import
#from datastore without knowing internal file names.
#No business logic.

from .repository import DataAccessError, RuleRepository
from .supabase_client import SupabaseRestClient
from .supabase_rules import SupabaseRuleRepository
from .in_memory import InMemoryRuleRepository
from .customers import SupabaseCustomerRepository, SupabaseOrderWriter

__all__ = [
    "DataAccessError",
    "RuleRepository",
    "SupabaseRestClient",
    "SupabaseRuleRepository",
    "InMemoryRuleRepository",
    "SupabaseCustomerRepository",
    "SupabaseOrderWriter",
]
