import attrs


@attrs.define
class User:
    id: str  # External identity provider subject, not generated here
    display_name: str = ''
