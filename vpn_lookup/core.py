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


""" Defines core data classes and errors for the VPN lookup helpers.
    """

from collections import namedtuple

RouteTableIDs = namedtuple('RouteTableIDs', ['public', 'private'])


class LookupFailure(Exception):
    """ Base class for lookups that completed against AWS but couldn't find
        what they were asked for. API errors are not wrapped in this class.
        """


class RouteTableIDsNotFound(LookupFailure):

    def __init__(self, vpc_id):
        super().__init__("route table ids not found")
        self.vpc_id = vpc_id


class CustomerGatewayConfigNotFound(LookupFailure):

    def __init__(self, customer_gateway_ip, stack_name):
        super().__init__(f"unable to resolve customer gateway configuration for {customer_gateway_ip} "
                         f"from cloudformation stack {stack_name}")
        self.customer_gateway_ip = customer_gateway_ip
        self.stack_name = stack_name


class StackNotFound(LookupFailure):

    def __init__(self, stack_name):
        super().__init__(f"unable to find cloudformation stack {stack_name}")
        self.stack_name = stack_name
