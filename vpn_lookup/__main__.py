# Copyright 2023, Chariot Solutions
# 
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
# 
#     http://www.apache.org/licenses/LICENSE-2.0
# 
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


import argparse
import boto3
import logging
import sys

from botocore.exceptions import BotoCoreError, ClientError

from .core import LookupFailure
from .aws import cloudformation, ec2


class UsageErrorParser(argparse.ArgumentParser):
    """ Exits with status 1 on a malformed command line, leaving 2 for failed lookups.
        """

    def error(self, message):
        self.print_usage(sys.stderr)
        print(message, file=sys.stderr)
        sys.exit(1)


arg_parser = UsageErrorParser(description="Resolves the AWS identifiers used to configure a site-to-site VPN")
arg_parser.add_argument("--vpcsForInstances",
                        metavar="INSTANCE_ID",
                        dest='vpcsForInstances',
                        nargs='+',
                        help="""One or more EC2 instance IDs. Prints the distinct VPCs that contain those
                                instances, one per line.
                                """)
arg_parser.add_argument("--routeTablesForVpc",
                        metavar="VPC_ID",
                        dest='routeTablesForVpc',
                        help="""A VPC ID. Prints the route tables tagged "PublicRouteTable" and
                                "PrivateRouteTable" in that VPC.
                                """)
arg_parser.add_argument("--customerGatewayConfig",
                        metavar="IP_ADDRESS",
                        dest='customerGatewayConfig',
                        help="""The public IP address of a customer gateway. Prints the VPN configuration
                                document for that gateway. Requires --stack.
                                """)
arg_parser.add_argument("--stack",
                        metavar="STACK_NAME",
                        dest='stack',
                        help="""The CloudFormation stack that created the customer gateways. If given without
                                --customerGatewayConfig, prints the stack's outputs.
                                """)
arg_parser.add_argument("--region",
                        metavar="REGION",
                        dest='region',
                        help="""The AWS region to query. If omitted, uses the default region.
                                """)
arg_parser.add_argument("--profile",
                        metavar="PROFILE_NAME",
                        dest='profile',
                        help="""The AWS credentials profile to use. If omitted, uses the default credentials.
                                """)
arg_parser.add_argument("--verbose",
                        dest='verbose',
                        action='store_true',
                        help="""Logs the AWS calls being made.
                                """)


def main(argv=None):
    try:
        args = arg_parser.parse_args(argv)
    except SystemExit as ex:
        return ex.code
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if not (args.vpcsForInstances or args.routeTablesForVpc or args.customerGatewayConfig or args.stack):
        arg_parser.print_usage(sys.stderr)
        print("no lookup requested", file=sys.stderr)
        return 1
    if args.customerGatewayConfig and not args.stack:
        arg_parser.print_usage(sys.stderr)
        print("--customerGatewayConfig requires --stack", file=sys.stderr)
        return 1

    try:
        session = boto3.session.Session(profile_name=args.profile, region_name=args.region)
        if args.vpcsForInstances:
            for vpc_id in ec2.lookup_vpc_ids(args.vpcsForInstances, session.client('ec2')):
                print(vpc_id)
        if args.routeTablesForVpc:
            route_tables = ec2.lookup_route_table_ids(args.routeTablesForVpc, session.client('ec2'))
            print(f"public: {route_tables.public}")
            print(f"private: {route_tables.private}")
        if args.stack:
            stack = cloudformation.lookup_stack(args.stack, session.client('cloudformation'))
            if args.customerGatewayConfig:
                print(ec2.lookup_customer_gateway_config(args.customerGatewayConfig, stack, session.client('ec2')))
            else:
                for key, value in cloudformation.stack_outputs(stack).items():
                    print(f"{key}: {value}")
    except (LookupFailure, ClientError, BotoCoreError) as ex:
        print(ex, file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
