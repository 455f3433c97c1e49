from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RecentProject(BaseModel):
    """
    A recently opened or saved project.

    Attributes:
        name: Project name at the time it was opened or saved
        file_path: Location of the project file; identity of the entry
        last_opened: ISO-8601 UTC timestamp of the open or save
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    name: str
    file_path: str
    last_opened: str
