from __future__ import annotations

from apicompat import Field, Info, Kind, Method, Type, TypeName, collect_violations


def build(*, with_email: bool, close_on_pointer: bool) -> Info:
    # type User struct { ID int64 `json:"id"`; Email string; Friends []*User }
    # func (u User) Close() error
    info = Info()
    user = Type(name=TypeName.make("example.com/accounts", "User"), kind=Kind.STRUCT)
    user.fields = [
        Field(name="ID", type=Type(kind=Kind.INT64), tag='json:"id"'),
        Field(name="Friends", type=Type(kind=Kind.SLICE, elem=Type(kind=Kind.PTR, elem=user.ref()))),
    ]
    if with_email:
        user.fields.append(Field(name="Email", type=Type(kind=Kind.STRING)))
    user.methods["Close"] = Method(
        name="Close",
        type=Type(kind=Kind.FUNC, results=[Type(name=TypeName("error"), kind=Kind.INTERFACE)]),
        ptr_receiver=close_on_pointer,
    )
    info.add(user)
    info.validate()
    return info


def main() -> None:
    old = build(with_email=True, close_on_pointer=False)
    new = build(with_email=False, close_on_pointer=True)
    name = TypeName.make("example.com/accounts", "User")

    for v in collect_violations(old, new, old.types[name], new.types[name]):
        print(f"{name} incompatible: {v}")


if __name__ == "__main__":
    main()
