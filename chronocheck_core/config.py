from typing import Optional

from pydantic import BaseModel, Field

from chronocheck_core.runtime_config import EngineRuntimeConfig


class ChronocheckConfig(BaseModel):
    """
    Configuration for the Chronocheck engine.
    Decouples the engine from environment variables.
    """

    model_config = {"arbitrary_types_allowed": True}

    # Registry
    profiles_dir: Optional[str] = Field(None, description="Directory of YAML profiles loaded on top of the bundled ones")
    include_bundled_profiles: Optional[bool] = Field(None, description="Load bundled profiles (default: runtime flag)")

    runtime: EngineRuntimeConfig = Field(default_factory=EngineRuntimeConfig.load_from_env)

    @property
    def effective_profiles_dir(self) -> Optional[str]:
        return self.profiles_dir or self.runtime.registry.profiles_dir

    @property
    def effective_include_bundled(self) -> bool:
        if self.include_bundled_profiles is None:
            return bool(self.runtime.features.bundled_profiles)
        return bool(self.include_bundled_profiles)
